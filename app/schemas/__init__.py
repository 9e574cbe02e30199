"""Pydantic schemas for Learner Analytics Service."""
