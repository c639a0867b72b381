"""Password Reset Tests

Tests for the forgot-password and reset-password flow.
"""

from datetime import datetime, timedelta, timezone

import pytest

from bookclub.auth.passwords import validate_password_strength, verify_password


def _reset_token_from(mock_email) -> str:
    reset_url = mock_email.send_password_reset_email.call_args.kwargs["reset_url"]
    return reset_url.split("token=", 1)[1]


class TestForgotPassword:
    """Test reset link requests"""

    @pytest.mark.asyncio
    async def test_sends_reset_link(self, test_client, db, mock_email, member_user):
        """Known email gets a reset link with a one-hour expiry"""
        response = await test_client.post(
            "/api/auth/forgot-password",
            json={"email": "reader@bookclub.org"}
        )

        assert response.status_code == 200
        mock_email.send_password_reset_email.assert_called_once()
        kwargs = mock_email.send_password_reset_email.call_args.kwargs
        assert kwargs["to_email"] == "reader@bookclub.org"
        assert kwargs["reset_url"].startswith("https://bookclub.test/auth/reset-password?token=")

        profile = db.get_profile_by_id(member_user["id"])
        assert profile["reset_token"] == _reset_token_from(mock_email)
        expiry = datetime.fromisoformat(profile["reset_token_expiry"])
        remaining = expiry - datetime.now(timezone.utc)
        assert timedelta(minutes=55) < remaining <= timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_unknown_email_same_response(self, test_client, mock_email, member_user):
        """Unknown emails get the same message and no email is sent"""
        known = await test_client.post("/api/auth/forgot-password", json={"email": "reader@bookclub.org"})
        unknown = await test_client.post("/api/auth/forgot-password", json={"email": "ghost@bookclub.org"})

        assert unknown.status_code == 200
        assert unknown.json() == known.json()
        assert mock_email.send_password_reset_email.call_count == 1


class TestResetPassword:
    """Test setting a new password with a token"""

    @pytest.mark.asyncio
    async def test_reset_then_login(self, test_client, db, mock_email, member_user):
        """A valid token sets the password and is cleared"""
        await test_client.post("/api/auth/forgot-password", json={"email": "reader@bookclub.org"})
        token = _reset_token_from(mock_email)

        response = await test_client.post(
            "/api/auth/reset-password",
            json={"token": token, "password": "NewSecret9"}
        )

        assert response.status_code == 200
        profile = db.get_profile_by_id(member_user["id"])
        assert profile["reset_token"] is None
        assert profile["reset_token_expiry"] is None
        assert verify_password("NewSecret9", profile["password_hash"])

        login = await test_client.post(
            "/api/auth/login",
            json={"email": "reader@bookclub.org", "password": "NewSecret9"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, test_client, mock_email, member_user):
        """A token cannot be used twice"""
        await test_client.post("/api/auth/forgot-password", json={"email": "reader@bookclub.org"})
        token = _reset_token_from(mock_email)

        first = await test_client.post("/api/auth/reset-password", json={"token": token, "password": "NewSecret9"})
        second = await test_client.post("/api/auth/reset-password", json={"token": token, "password": "Another99x"})

        assert first.status_code == 200
        assert second.status_code == 400
        assert "invalid" in second.json()["detail"]

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, test_client, db, member_user):
        """A token past its expiry is rejected"""
        db.set_reset_token(member_user["id"], "expired-token", datetime.now(timezone.utc) - timedelta(minutes=1))

        response = await test_client.post(
            "/api/auth/reset-password",
            json={"token": "expired-token", "password": "NewSecret9"}
        )

        assert response.status_code == 400
        assert "expired" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_token_rejected(self, test_client):
        """An unknown token is rejected"""
        response = await test_client.post(
            "/api/auth/reset-password",
            json={"token": "not-a-real-token", "password": "NewSecret9"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_weak_password_rejected(self, test_client, db, member_user):
        """Weak passwords are rejected and the token stays usable"""
        db.set_reset_token(member_user["id"], "good-token", datetime.now(timezone.utc) + timedelta(hours=1))

        response = await test_client.post(
            "/api/auth/reset-password",
            json={"token": "good-token", "password": "short"}
        )

        assert response.status_code == 400
        assert db.get_profile_by_id(member_user["id"])["reset_token"] == "good-token"


class TestPasswordStrength:
    """Test the server-side password rule"""

    @pytest.mark.parametrize("password,fragment", [
        ("Ab1", "at least 8"),
        ("lowercase1", "uppercase"),
        ("UPPERCASE1", "lowercase"),
        ("NoDigitsHere", "number"),
    ])
    def test_weak_passwords(self, password, fragment):
        assert fragment in validate_password_strength(password)

    def test_strong_password(self):
        assert validate_password_strength("Password123") is None
