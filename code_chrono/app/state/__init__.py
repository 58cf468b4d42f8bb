"""State QObjects bound by the UI."""
