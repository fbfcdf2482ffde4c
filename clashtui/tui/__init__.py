"""Terminal UI: events, widgets, tabs and the Textual host."""
