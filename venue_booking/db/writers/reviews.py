from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import Connection

from venue_booking.domain.models import Review
from venue_booking.models.reviews import ReviewRow


def insert_review(conn: Connection, review: Review) -> None:
    """
    Insert a review row.

    Args:
        conn (Connection): Active connection inside a transaction.
        review (Review): Review to insert.
    """
    conn.execute(
        insert(ReviewRow).values(
            id=review.id,
            reservation_id=review.reservation_id,
            listing_id=review.listing_id,
            guest_id=review.guest_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )
    )
