import pytest

from homeservices.core.errors import (
    BookingNotCompleted,
    BookingNotFound,
    DuplicateReview,
    Forbidden,
    InvalidRating,
)
from homeservices.db.models import BookingStatus, Review, ReviewTarget, Role
from homeservices.services.review_service import ReviewService


@pytest.fixture
def reviews(db):
    return ReviewService(db)


@pytest.fixture
def setup(make_user, make_service, make_booking):
    partner = make_user(role=Role.PARTNER)
    customer = make_user()
    booking = make_booking(customer, make_service(partner), status=BookingStatus.COMPLETED)
    return partner, customer, booking


def test_customer_reviews_provider(reviews, setup, as_actor):
    partner, customer, booking = setup
    review = reviews.submit(as_actor(customer), booking.id, 5, "Spotless")

    assert review.reviewer_id == customer.id
    assert review.reviewee_id == partner.id
    assert review.target is ReviewTarget.PROVIDER


def test_partner_reviews_customer(reviews, setup, as_actor):
    partner, customer, booking = setup
    review = reviews.submit(as_actor(partner), booking.id, 4, target=ReviewTarget.CUSTOMER)

    assert review.reviewer_id == partner.id
    assert review.reviewee_id == customer.id


def test_directions_are_independent_but_unique(reviews, setup, as_actor):
    partner, customer, booking = setup
    reviews.submit(as_actor(customer), booking.id, 5)
    reviews.submit(as_actor(partner), booking.id, 3, target="customer")

    with pytest.raises(DuplicateReview):
        reviews.submit(as_actor(customer), booking.id, 1)


def test_upcoming_booking_cannot_be_reviewed(reviews, make_user, make_service, make_booking, as_actor):
    customer = make_user()
    booking = make_booking(customer, make_service(make_user(role=Role.PARTNER)))
    with pytest.raises(BookingNotCompleted):
        reviews.submit(as_actor(customer), booking.id, 5)


def test_missing_booking(reviews, make_user, as_actor):
    with pytest.raises(BookingNotFound):
        reviews.submit(as_actor(make_user()), 404, 5)


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_rating_out_of_range(reviews, setup, rating, as_actor):
    _, customer, booking = setup
    with pytest.raises(InvalidRating):
        reviews.submit(as_actor(customer), booking.id, rating)


def test_wrong_direction_is_forbidden(reviews, setup, make_user, as_actor):
    partner, customer, booking = setup
    with pytest.raises(Forbidden):
        reviews.submit(as_actor(partner), booking.id, 5, target=ReviewTarget.PROVIDER)
    with pytest.raises(Forbidden):
        reviews.submit(as_actor(customer), booking.id, 5, target=ReviewTarget.CUSTOMER)
    with pytest.raises(Forbidden):
        reviews.submit(as_actor(make_user()), booking.id, 5)


def test_average_for_provider(reviews, make_user, make_service, make_booking, as_actor):
    partner = make_user(role=Role.PARTNER)
    assert reviews.average_for_provider(partner.id) == {"average_rating": 0.0, "ratings_count": 0}

    for rating in (5, 4):
        customer = make_user()
        booking = make_booking(customer, make_service(partner), status=BookingStatus.COMPLETED)
        reviews.submit(as_actor(customer), booking.id, rating)

    assert reviews.average_for_provider(partner.id) == {"average_rating": 4.5, "ratings_count": 2}
    assert len(reviews.list_for_provider(partner.id)) == 2


def test_concurrent_duplicate_is_rejected_by_the_unique_constraint(reviews, setup, as_actor, db, monkeypatch):
    partner, customer, booking = setup

    def lose_the_race(booking_id, target):
        # another request commits its review after our existence check
        db.add(Review(booking_id=booking_id, reviewer_id=customer.id, reviewee_id=partner.id,
                      target=target, rating=2))
        db.commit()
        return None

    monkeypatch.setattr(reviews, "get_by_booking_and_target", lose_the_race)

    with pytest.raises(DuplicateReview):
        reviews.submit(as_actor(customer), booking.id, 5)

    stored = db.query(Review).filter(Review.booking_id == booking.id).all()
    assert [r.rating for r in stored] == [2]
