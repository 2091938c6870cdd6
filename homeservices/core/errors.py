"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers registered in
``homeservices.main`` turn them into the ``{success: false, error}`` envelope.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


# 401
class Unauthenticated(AppError):
    status_code = 401
    message = "Access token required"


class InvalidOrExpiredToken(Unauthenticated):
    message = "Invalid or expired token"


class InvalidCredentials(Unauthenticated):
    message = "Invalid email or password"


# 403
class Forbidden(AppError):
    status_code = 403
    message = "You are not allowed to perform this action"


# 404
class NotFound(AppError):
    status_code = 404
    message = "Resource not found"


class UserNotFound(NotFound):
    message = "User not found"


class CustomerNotFound(NotFound):
    message = "Customer not found"


class ServiceNotFound(NotFound):
    message = "Service not found"


class BookingNotFound(NotFound):
    message = "Booking not found"


class CategoryNotFound(NotFound):
    message = "Category not found"


class OccupationNotFound(NotFound):
    message = "Occupation not found"


class ProfileNotFound(NotFound):
    message = "Provider profile not found"


class AddressNotFound(NotFound):
    message = "Address not found"


# 400
class ValidationError(AppError):
    status_code = 400
    message = "Validation failed"


class InvalidStatus(ValidationError):
    message = "Invalid status. Must be upcoming, completed, or cancelled"


class InvalidRating(ValidationError):
    message = "rating must be between 1 and 5"


class BookingNotCompleted(ValidationError):
    message = "You can only review completed bookings"


class AlreadyVerified(ValidationError):
    message = "Email is already verified"


class OtpError(AppError):
    status_code = 400
    message = "OTP verification failed"


class NoVerificationRequest(OtpError):
    message = "No verification request found for this email"


class OtpExpired(OtpError):
    message = "OTP has expired. Please request a new code"


class InvalidOtp(OtpError):
    message = "Invalid OTP provided"


# 409
class Conflict(AppError):
    status_code = 409
    message = "Resource already exists"


class EmailAlreadyExists(Conflict):
    message = "User with this email already exists"


class DuplicateReview(Conflict):
    message = "Review already exists for this booking"


class ProfileAlreadyExists(Conflict):
    message = "Provider profile already exists for this user"


# 500
class InternalError(AppError):
    status_code = 500


class DeliveryFailed(InternalError):
    message = "Unable to send verification email"


class IdentityProviderError(InternalError):
    message = "Identity provider request failed"
