"""NEST feature modules (router / service / repository / schemas each)."""
