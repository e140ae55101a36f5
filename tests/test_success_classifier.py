"""Tests for the login success heuristic."""

from autologin.success_classifier import is_login_successful, success_indicators


class TestSuccessIndicators:
    """Test cases for the eight indicators."""

    def test_indicator_count(self):
        """Test exactly eight indicators are produced."""
        assert len(success_indicators("", "")) == 8

    def test_indicator_order(self):
        """Test indicator positions for a mixed page."""
        indicators = success_indicators(
            "Welcome back! Invalid widget.", "My Dashboard"
        )

        assert indicators == [False, True, False, False, True, False, True, True]

    def test_case_insensitive(self):
        """Test markers match regardless of case."""
        indicators = success_indicators("LOGOUT | My Account", "")

        assert indicators[2] is True
        assert indicators[3] is True

    def test_none_inputs(self):
        """Test missing text is treated as empty."""
        assert success_indicators(None, None) == [False] * 5 + [True] * 3


class TestIsLoginSuccessful:
    """Test cases for the success decision."""

    def test_positive_markers_succeed(self):
        """Test a page with welcome, dashboard and logout succeeds."""
        body = "Welcome, Alice. Go to your dashboard or logout."

        assert is_login_successful(body, "Home") is True

    def test_invalid_without_positives_fails(self):
        """Test an error page with no positive markers fails."""
        body = "Invalid email or password."

        assert is_login_successful(body, "Sign in") is False

    def test_all_negatives_present_fail_even_with_two_positives(self):
        """Test two positives cannot outweigh three failure markers."""
        body = "welcome logout invalid incorrect login failed"

        assert is_login_successful(body, "") is False

    def test_neutral_page_succeeds(self):
        """Test a page with no markers at all scores three and succeeds."""
        assert is_login_successful("Nothing to see here", "") is True

    def test_threshold_is_strictly_greater_than_two(self):
        """Test exactly two true indicators is not success."""
        body = "incorrect login failed dashboard"

        assert sum(success_indicators(body, "")) == 2
        assert is_login_successful(body, "") is False

    def test_title_dashboard_counts(self):
        """Test the title indicator contributes to the score."""
        body = "invalid incorrect login failed welcome logout"

        assert is_login_successful(body, "") is False
        assert is_login_successful(body, "User Dashboard") is True
