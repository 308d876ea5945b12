"""
Test Suite for GroupFinder API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_votes.py: Vote aggregator and /groups/{id}/vote
- test_reviews.py: Rating aggregation and review endpoints
- test_verification.py: Moderation status, audit log, moderation queue
- test_reputation.py / test_levels.py: Reputation ledger, levels, leaderboard
- test_badges.py: Badge catalog, awards, contribution badges
- test_groups.py, test_categories.py, test_auth.py: Directory and accounts

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_votes.py

    # Run with verbose output
    pytest -v
"""
