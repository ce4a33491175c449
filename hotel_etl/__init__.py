"""Hotel booking ETL: noisy PMS export -> booking star schema."""

__version__ = "0.1.0"
