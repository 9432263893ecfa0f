"""Static typing content."""
