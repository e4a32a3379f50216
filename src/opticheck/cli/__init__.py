"""opticheck command-line interface."""
