"""TenderFlow command line interface."""
