"""Reporting and plotting of EC runs."""

from .plots import generate_ec_plots
from .reporting import scores_filename, write_ec_report, write_ec_scores, write_evaporated

__all__ = ["generate_ec_plots", "scores_filename", "write_ec_report", "write_ec_scores", "write_evaporated"]
