"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the account engine.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Balances are fully explained by applied transactions
2. atomicity.py - A rejected transaction changes nothing
3. idempotency.py - Ids cannot be applied, resolved or charged back twice
4. determinism.py - Reproducible behavior across replay and interleaving

These tests use hypothesis for property-based testing.
"""
