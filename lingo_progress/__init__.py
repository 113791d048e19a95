"""Progress & hearts economy service for the Lingo learning app."""
