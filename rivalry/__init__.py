"""Daily trivia contest server and player client."""
