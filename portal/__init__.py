"""NorthStar client portal: client record store with server-rendered pages and a JSON API."""
