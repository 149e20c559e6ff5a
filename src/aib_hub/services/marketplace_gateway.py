"""
Marketplace Gateway - reads and writes against the marketplace tables
Maps ORM rows to entity schemas; every datastore failure surfaces as GatewayError
"""
from contextlib import contextmanager
from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..config import config
from ..db.models import (
    Application,
    ApplicationStatus,
    ContactMessage,
    Creator,
    CreatorStatus,
    Invitation,
    InvitationStatus,
    Job,
    MembershipTier,
    PortfolioItem,
    Profile,
)
from ..exceptions import (
    DuplicateApplicationError,
    GatewayError,
    MarketplaceError,
    NotFoundError,
)
from ..schemas import (
    ApplicationSchema,
    ContactMessageCreate,
    ContactMessageSchema,
    CreatorSchema,
    InvitationCreate,
    InvitationSchema,
    JobCreate,
    JobSchema,
    PortfolioItemCreate,
)
from .whatsapp import whatsapp_link

logger = logging.getLogger(__name__)

# Fields a creator may change on their own profile
CREATOR_EDITABLE_FIELDS = {
    "full_name",
    "city",
    "whatsapp",
    "profile_photo",
    "experience",
    "bio",
    "skills",
}


def to_job_entity(row: Job) -> JobSchema:
    job = JobSchema.model_validate(row)
    return job.model_copy(update={"whatsapp_link": whatsapp_link(row.whatsapp)})


def to_creator_entity(row: Creator) -> CreatorSchema:
    return CreatorSchema.model_validate(row)


class MarketplaceGateway:
    """
    Data gateway for creators, jobs, applications, invitations, contact
    messages and profiles.

    Reads return entity schemas, never ORM rows. Writes commit immediately;
    there is no unit of work spanning several gateway calls.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _operation(self, action: str):
        """Roll back and wrap any datastore failure as GatewayError(action)"""
        try:
            yield
        except MarketplaceError:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {type(e).__name__}", exc_info=True)
            raise GatewayError(action) from e

    # ------------------------------------------------------------------
    # Creators
    # ------------------------------------------------------------------

    def _creator_query(self):
        return self.db.query(Creator).options(selectinload(Creator.portfolio))

    def _get_creator_row(self, creator_id: int, back_to: str = "/creators") -> Creator:
        row = self._creator_query().filter(Creator.id == creator_id).first()
        if row is None:
            raise NotFoundError("creator", creator_id, back_to=back_to)
        return row

    def list_creators(self, status: Optional[CreatorStatus] = None) -> List[CreatorSchema]:
        """All creators in insertion order, optionally restricted to one status"""
        with self._operation("load creators"):
            query = self._creator_query()
            if status is not None:
                query = query.filter(Creator.status == status.value)
            return [to_creator_entity(row) for row in query.order_by(Creator.id).all()]

    def list_approved_creators(self) -> List[CreatorSchema]:
        return self.list_creators(CreatorStatus.APPROVED)

    def get_creator(self, creator_id: int, approved_only: bool = False) -> CreatorSchema:
        with self._operation("load creator"):
            row = self._get_creator_row(creator_id)
            if approved_only and row.status != CreatorStatus.APPROVED.value:
                raise NotFoundError("creator", creator_id, back_to="/creators")
            return to_creator_entity(row)

    def find_creator_id_for_user(self, user_id: int) -> Optional[int]:
        """Secondary lookup by linked_user_id; None when the user has no creator row"""
        with self._operation("load creator profile"):
            row = self.db.query(Creator.id).filter(Creator.linked_user_id == user_id).first()
            return row[0] if row else None

    def create_creator(self, user_id: int, full_name: str, city: str, email: Optional[str] = None) -> CreatorSchema:
        """Create the creator row linked to a user: BASE tier, PENDING, no skills or tags"""
        with self._operation("create creator profile"):
            row = Creator(
                linked_user_id=user_id,
                full_name=full_name,
                city=city,
                email=email,
                skills=[],
                purchased_tags=[],
                bio="",
                experience="",
                whatsapp="",
                is_featured=False,
                tier=MembershipTier.BASE.value,
                status=CreatorStatus.PENDING.value,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Creator {row.id} created for user {user_id}")
            return to_creator_entity(row)

    def update_creator(self, creator_id: int, **fields) -> CreatorSchema:
        """Apply self-service edits; unknown field names raise ValueError"""
        unknown = set(fields) - CREATOR_EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        with self._operation("update profile"):
            row = self._get_creator_row(creator_id, back_to="/profile")
            for name, value in fields.items():
                if name == "skills":
                    value = list(value)
                setattr(row, name, value)
            self.db.commit()
            self.db.refresh(row)
            return to_creator_entity(row)

    def set_purchased_tags(self, creator_id: int, tags: List[str]) -> CreatorSchema:
        with self._operation("update tags"):
            row = self._get_creator_row(creator_id, back_to="/membership")
            row.purchased_tags = list(tags)
            self.db.commit()
            self.db.refresh(row)
            return to_creator_entity(row)

    def set_tier(self, creator_id: int, tier: MembershipTier) -> CreatorSchema:
        """Change the tier; purchased tags are left as they are"""
        with self._operation("update membership tier"):
            row = self._get_creator_row(creator_id)
            row.tier = tier.value
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Creator {creator_id} tier set to {tier.value}")
            return to_creator_entity(row)

    def set_status(self, creator_id: int, status: CreatorStatus) -> CreatorSchema:
        with self._operation("update creator status"):
            row = self._get_creator_row(creator_id, back_to="/admin")
            row.status = status.value
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Creator {creator_id} status set to {status.value}")
            return to_creator_entity(row)

    def toggle_featured(self, creator_id: int) -> CreatorSchema:
        with self._operation("update featured flag"):
            row = self._get_creator_row(creator_id, back_to="/admin")
            row.is_featured = not row.is_featured
            self.db.commit()
            self.db.refresh(row)
            return to_creator_entity(row)

    def delete_creator(self, creator_id: int) -> None:
        """Purge a creator with its portfolio, applications and invitations"""
        with self._operation("delete creator"):
            row = self._get_creator_row(creator_id, back_to="/admin")
            self.db.delete(row)
            self.db.commit()
            logger.info(f"Creator {creator_id} purged")

    # ------------------------------------------------------------------
    # Portfolio
    # ------------------------------------------------------------------

    def add_portfolio_item(self, creator_id: int, item: PortfolioItemCreate) -> CreatorSchema:
        with self._operation("add portfolio item"):
            row = self._get_creator_row(creator_id, back_to="/profile")
            row.portfolio.append(PortfolioItem(type=item.type.value, url=item.url, title=item.title))
            self.db.commit()
            self.db.refresh(row)
            return to_creator_entity(row)

    def delete_portfolio_item(self, creator_id: int, item_id: int) -> CreatorSchema:
        with self._operation("delete portfolio item"):
            item = self.db.query(PortfolioItem).filter(
                PortfolioItem.id == item_id,
                PortfolioItem.creator_id == creator_id,
            ).first()
            if item is None:
                raise NotFoundError("portfolio item", item_id, back_to="/profile")
            self.db.delete(item)
            self.db.commit()
            return to_creator_entity(self._get_creator_row(creator_id, back_to="/profile"))

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def list_jobs(self) -> List[JobSchema]:
        """Jobs newest first"""
        with self._operation("load jobs"):
            rows = self.db.query(Job).order_by(Job.posted_date.desc(), Job.id.desc()).all()
            return [to_job_entity(row) for row in rows]

    def get_job(self, job_id: int) -> JobSchema:
        with self._operation("load job"):
            row = self.db.query(Job).filter(Job.id == job_id).first()
            if row is None:
                raise NotFoundError("job", job_id, back_to="/jobs")
            return to_job_entity(row)

    def create_job(self, form: JobCreate, posted_by_user_id: Optional[int] = None) -> JobSchema:
        with self._operation("post job"):
            row = Job(
                title=form.title,
                city=form.city,
                required_skills=list(form.skills),
                description=form.description,
                budget=form.budget,
                company=form.company or config.DEFAULT_JOB_COMPANY,
                contact_email=str(form.contact_email),
                whatsapp=form.whatsapp,
                posted_date=date.today(),
                posted_by_user_id=posted_by_user_id,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Job {row.id} posted in {row.city}")
            return to_job_entity(row)

    def delete_job(self, job_id: int) -> None:
        with self._operation("delete job"):
            row = self.db.query(Job).filter(Job.id == job_id).first()
            if row is None:
                raise NotFoundError("job", job_id, back_to="/admin")
            self.db.delete(row)
            self.db.commit()
            logger.info(f"Job {job_id} deleted")

    # ------------------------------------------------------------------
    # Applications, invitations, contact messages
    # ------------------------------------------------------------------

    def find_application(self, job_id: int, creator_id: int) -> Optional[ApplicationSchema]:
        with self._operation("check existing applications"):
            row = self.db.query(Application).filter(
                Application.job_id == job_id,
                Application.creator_id == creator_id,
            ).first()
            return ApplicationSchema.model_validate(row) if row else None

    def create_application(self, job_id: int, creator_id: int, cover_letter: str = "") -> ApplicationSchema:
        """
        Insert an application after checking for an existing (job, creator) pair.

        The pre-check gives the friendly error; the unique constraint catches
        the race where two submissions pass the check together.
        """
        if self.find_application(job_id, creator_id) is not None:
            raise DuplicateApplicationError(job_id, creator_id)

        with self._operation("submit application"):
            if self.db.query(Job.id).filter(Job.id == job_id).first() is None:
                raise NotFoundError("job", job_id, back_to="/jobs")

            row = Application(
                job_id=job_id,
                creator_id=creator_id,
                cover_letter=cover_letter or "",
                status=ApplicationStatus.PENDING.value,
            )
            self.db.add(row)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(f"Duplicate application for job {job_id} by creator {creator_id} caught by constraint")
                raise DuplicateApplicationError(job_id, creator_id)
            self.db.refresh(row)
            logger.info(f"Creator {creator_id} applied to job {job_id}")
            return ApplicationSchema.model_validate(row)

    def list_applications_for_creator(self, creator_id: int) -> List[ApplicationSchema]:
        with self._operation("load applications"):
            rows = self.db.query(Application).filter(
                Application.creator_id == creator_id
            ).order_by(Application.id.desc()).all()
            return [ApplicationSchema.model_validate(row) for row in rows]

    def create_invitation(self, form: InvitationCreate) -> InvitationSchema:
        with self._operation("send invitation"):
            if self.db.query(Creator.id).filter(Creator.id == form.creator_id).first() is None:
                raise NotFoundError("creator", form.creator_id, back_to="/creators")

            row = Invitation(
                creator_id=form.creator_id,
                sender_email=str(form.sender_email),
                job_title=form.job_title,
                job_budget=form.job_budget,
                message=form.message or "",
                status=InvitationStatus.PENDING.value,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Invitation {row.id} sent to creator {form.creator_id}")
            return InvitationSchema.model_validate(row)

    def list_invitations_for_creator(self, creator_id: int) -> List[InvitationSchema]:
        with self._operation("load invitations"):
            rows = self.db.query(Invitation).filter(
                Invitation.creator_id == creator_id
            ).order_by(Invitation.id.desc()).all()
            return [InvitationSchema.model_validate(row) for row in rows]

    def create_contact_message(self, form: ContactMessageCreate) -> ContactMessageSchema:
        with self._operation("send message"):
            row = ContactMessage(name=form.name, email=str(form.email), message=form.message)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return ContactMessageSchema.model_validate(row)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile_role(self, user_id: int) -> Optional[str]:
        """Raw role value from the profiles row, None when there is no row or no role"""
        with self._operation("load profile"):
            row = self.db.query(Profile.role).filter(Profile.id == user_id).first()
            return row[0] if row else None

    def ensure_profile(self, user_id: int, role: str) -> None:
        """Create the profiles row if missing; an existing role is never overwritten"""
        with self._operation("create profile"):
            if self.db.query(Profile.id).filter(Profile.id == user_id).first() is None:
                self.db.add(Profile(id=user_id, role=role))
                self.db.commit()
