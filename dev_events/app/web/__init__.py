"""Server-rendered pages: the event listing and the event detail page."""
