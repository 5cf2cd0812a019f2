"""Services: league domain logic between the routes and the repositories."""
