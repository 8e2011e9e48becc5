import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from course_checkout.database import Base, make_session_factory
from course_checkout.errors import GrantStoreError
from course_checkout.models import Course, UserCourse

logger = logging.getLogger(__name__)


class CourseStore:
    """Course lookups and access grants backed by SQLAlchemy."""

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    def create_schema(self):
        Base.metadata.create_all(bind=self.engine)

    def find_course_id(self, slug: str):
        """Return the id of the course with exactly this slug, or None."""
        try:
            with self.SessionLocal() as db:
                course = db.query(Course).filter_by(slug=slug).first()
                return course.id if course else None
        except SQLAlchemyError as exc:
            logger.error("Course lookup failed for slug %r", slug, exc_info=True)
            raise GrantStoreError(f"course lookup failed: {exc}") from exc

    def insert_grant(self, user_id: str, course_id) -> bool:
        """Insert a grant. Returns False when the user already had it."""
        try:
            with self.SessionLocal() as db:
                db.add(UserCourse(user_id=user_id, course_id=course_id))
                try:
                    db.commit()
                    return True
                except IntegrityError as exc:
                    db.rollback()
                    # Only a duplicate (user_id, course_id) pair counts as success.
                    if self._grant_exists(db, user_id, course_id):
                        return False
                    logger.error("Grant insert rejected for course %s", course_id, exc_info=True)
                    raise GrantStoreError(f"grant insert rejected: {exc}") from exc
        except GrantStoreError:
            raise
        except SQLAlchemyError as exc:
            logger.error("Grant insert failed for course %s", course_id, exc_info=True)
            raise GrantStoreError(f"grant insert failed: {exc}") from exc

    @staticmethod
    def _grant_exists(db, user_id, course_id):
        return (
            db.query(UserCourse.id).filter_by(user_id=user_id, course_id=course_id).first()
            is not None
        )
