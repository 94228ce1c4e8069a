"""Clerk session token verification."""

from abc import ABC, abstractmethod

from jose import JWTError, jwt

from usersync.models.auth import AuthContext


class SessionVerificationError(Exception):
    """Raised when a session token is missing, invalid or expired."""


class SessionVerifier(ABC):
    """Turns a bearer/session token into a verified caller context."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthContext:
        """Verify a session token.

        Raises:
            SessionVerificationError: If the token cannot be trusted
        """
        pass


class ClerkSessionVerifier(SessionVerifier):
    """Networkless verification of Clerk session JWTs with the instance public key."""

    ALGORITHMS = ["RS256"]

    def __init__(
        self,
        jwt_key: str,
        authorized_parties: list[str] | None = None,
        clock_skew_seconds: int = 5,
    ) -> None:
        """Initialize the verifier.

        Args:
            jwt_key: PEM encoded public key of the Clerk instance
            authorized_parties: Allowed values of the ``azp`` claim (origins); empty allows any
            clock_skew_seconds: Leeway applied to ``exp`` and ``nbf``
        """
        if not jwt_key:
            raise ValueError("jwt_key is required")
        self.jwt_key = jwt_key
        self.authorized_parties = authorized_parties or []
        self.clock_skew_seconds = clock_skew_seconds

    def verify_token(self, token: str) -> AuthContext:
        try:
            claims = jwt.decode(
                token,
                self.jwt_key,
                algorithms=self.ALGORITHMS,
                options={"leeway": self.clock_skew_seconds, "verify_aud": False},
            )
        except JWTError as e:
            raise SessionVerificationError(f"invalid session token: {e}") from e

        if not claims.get("sub"):
            raise SessionVerificationError("session token has no subject")

        azp = claims.get("azp")
        if azp and self.authorized_parties and azp not in self.authorized_parties:
            raise SessionVerificationError(f"unauthorized party: {azp}")

        return AuthContext.from_claims(claims)
