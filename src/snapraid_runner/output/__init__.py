"""Reporters — terminal summary, JSON result files, Slack notifications."""
