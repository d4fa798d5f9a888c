"""Qt widgets for the perception demo."""
