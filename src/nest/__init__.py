"""NEST - Family trip planner backed by a mock Supabase client."""

__version__ = "0.1.0"
