"""BDD tests for all-or-nothing checkout."""

from pytest_bdd import scenarios

scenarios("features/checkout.feature")
