"""Packaged JSON messages of the langmanager command line interface."""
