"""VantageFlow - project tracking dashboard backend.

Home of the free-text project ingestion engine: paste meeting notes or an
outline, get back a draft project with phases, tasks, team and budget.
"""

__version__ = "0.3.0"
