"""Host adapters that feed staged files to the gate."""
