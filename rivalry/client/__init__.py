"""Player-side client: session state machine, countdown and HTTP access."""
