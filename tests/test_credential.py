"""Tests for the Credential lifecycle."""

import pytest

from content_workflow.clients import AuthenticationError, Credential, CredentialState


class TestCredentialLifecycle:
    """Tests for credential state transitions."""

    def test_starts_absent(self):
        """A credential without a token is absent and unusable."""
        credential = Credential()

        assert credential.state is CredentialState.ABSENT
        assert not credential.is_usable

    def test_acquire(self):
        """Acquiring a token makes the credential usable."""
        credential = Credential()
        credential.acquire("  tok  ")

        assert credential.state is CredentialState.ACQUIRED
        assert credential.authorization_header() == {"Authorization": "Bearer tok"}

    def test_acquire_rejects_blank_token(self):
        """A blank token cannot be acquired."""
        with pytest.raises(ValueError):
            Credential().acquire("   ")

    def test_invalidate_blocks_use(self):
        """An invalidated credential raises instead of producing a header."""
        credential = Credential("tok")
        credential.invalidate()

        assert credential.state is CredentialState.INVALIDATED
        with pytest.raises(AuthenticationError, match="invalidated"):
            credential.authorization_header()

    def test_reacquire_after_invalidation(self):
        """A new token can replace an invalidated one."""
        credential = Credential("old")
        credential.invalidate()
        credential.acquire("new")

        assert credential.authorization_header() == {"Authorization": "Bearer new"}

    def test_clear(self):
        """Clearing forgets the token."""
        credential = Credential("tok")
        credential.clear()

        assert credential.state is CredentialState.CLEARED
        assert not credential.is_usable

    def test_invalidate_absent_is_noop(self):
        """Invalidating an absent credential leaves it absent."""
        credential = Credential()
        credential.invalidate()

        assert credential.state is CredentialState.ABSENT


class TestCredentialFromEnv:
    """Tests for Credential.from_env()."""

    def test_reads_github_token(self):
        """GITHUB_TOKEN is picked up."""
        credential = Credential.from_env({"GITHUB_TOKEN": "abc"})

        assert credential.is_usable

    def test_missing_token_is_absent(self):
        """No variable means an absent credential."""
        assert Credential.from_env({}).state is CredentialState.ABSENT

    def test_repr_hides_token(self):
        """The token never appears in the repr."""
        assert "abc" not in repr(Credential("abc"))
