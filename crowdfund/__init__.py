"""Crowdfunding REST API."""
