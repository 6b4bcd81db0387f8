"""Integration tests for the sitecompose CLI.

These tests build real theme packages and sites in temporary directories
and drive the command line through typer's CliRunner.
"""
