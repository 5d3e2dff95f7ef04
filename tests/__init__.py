"""Test suite for the finance tracker."""
