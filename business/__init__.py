"""
business — the client's business profile and onboarding.
"""
