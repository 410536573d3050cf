from fastapi import HTTPException, status


class AppException:
    """Raise helpers mapping the service error taxonomy onto HTTP status codes."""

    @staticmethod
    def raise_400(message: str = "Bad Request"):
        """Malformed request or a refused business rule."""
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    @staticmethod
    def raise_401(message: str = "Not authenticated"):
        """Missing, invalid or expired bearer credential."""
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def raise_403(message: str = "Forbidden"):
        """Authenticated, but the role is not allowed here."""
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)

    @staticmethod
    def raise_404(message: str = "Not Found"):
        """Entity absent, or a referenced entity could not be resolved."""
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)

    @staticmethod
    def raise_conflict(action: str, current_status: str):
        """
        Invalid state transition. Reported as 400 with the current status in the message
        so clients can refresh their view of the rental.
        """
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Rental cannot be {action}. Current status: {current_status}",
        )
