"""
Reporters
=========

Terminal output for purge results.

Example
-------
>>> from bucket_purge.reporters import CLIReporter
>>> CLIReporter(verbose=True).report(purge_result)
"""

from bucket_purge.reporters.cli_reporter import CLIReporter

__all__ = ["CLIReporter"]
