"""
confluence_watch - Poll Confluence for changed pages and notify Slack.

Three jobs share one pipeline: check the execution window, load the job's
watermark, fetch pages changed since then, build Slack messages, deliver
them and persist the advanced watermark.

Usage:
    from confluence_watch.entrypoints import run_job

    outcome = run_job("confluence-update-notify")
"""

__version__ = "1.0.0"
