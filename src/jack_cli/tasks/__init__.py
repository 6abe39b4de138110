"""Task dispatch: targeting, arguments, response rendering."""
