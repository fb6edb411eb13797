"""Property-based testing for PropFlow dispatch.

Hypothesis-driven tests checking the assignment pipeline's invariants over
generated declarations and events, complementing the example-based unit
tests.
"""
