"""Stack topology, navigation block codec and sync planning."""
