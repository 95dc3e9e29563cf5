"""Pod assignment and match scheduling for monthly leagues."""
