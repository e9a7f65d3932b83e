"""Repository classes encapsulating database operations.

Repositories return SQLModel objects and perform commits/refreshes
where appropriate. A sitting and its subject rows are always written
together so a stored sitting never has a stale `total` row.
"""

from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from . import models


class SittingRepository:
    """CRUD operations for `Sitting` and its `SubjectResult` rows."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, sitting: models.Sitting, results: List[models.SubjectResult]) -> models.Sitting:
        """Store a `Sitting` and attach its `SubjectResult` rows."""
        for r in results:
            r.sitting_id = sitting.id
        sitting.results = list(results)
        self.session.add(sitting)
        self.session.commit()
        self.session.refresh(sitting)
        return sitting

    def get(self, sitting_id: str) -> Optional[models.Sitting]:
        """Fetch a sitting by id or `None` if not found."""
        return self.session.get(models.Sitting, sitting_id)

    def list_all(self) -> List[models.Sitting]:
        """Return all sittings, newest date first, then newest created."""
        stmt = select(models.Sitting).order_by(models.Sitting.date.desc(), models.Sitting.created_at.desc())
        return self.session.exec(stmt).all()

    def replace(self, sitting: models.Sitting, date, test_name: str, results: List[models.SubjectResult]) -> models.Sitting:
        """Overwrite a sitting's fields and swap in a fresh set of subject rows.

        The id and `created_at` are kept; every subject row is replaced,
        there is no partial update.
        """
        sitting.date = date
        sitting.test_name = test_name
        for r in results:
            r.sitting_id = sitting.id
        # delete-orphan cascade removes the previous rows on flush
        sitting.results = list(results)
        self.session.add(sitting)
        self.session.commit()
        self.session.refresh(sitting)
        return sitting

    def delete(self, sitting_id: str) -> bool:
        """Delete a sitting and its rows. Returns False if it did not exist."""
        sitting = self.get(sitting_id)
        if not sitting:
            return False
        self.session.delete(sitting)
        self.session.commit()
        return True

    def count(self) -> int:
        """Number of stored sittings."""
        return self.session.exec(select(func.count()).select_from(models.Sitting)).one()

    def delete_all(self, commit: bool = True) -> int:
        """Remove every sitting and subject row; returns the sittings removed.

        With `commit=False` the deletes are only flushed so a caller can
        add replacement rows in the same transaction.
        """
        sittings = self.session.exec(select(models.Sitting)).all()
        for s in sittings:
            self.session.delete(s)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return len(sittings)

    def add_many(self, items: List[tuple]) -> int:
        """Stage several `(sitting, results)` pairs and commit them at once."""
        for sitting, results in items:
            for r in results:
                r.sitting_id = sitting.id
            sitting.results = list(results)
            self.session.add(sitting)
        self.session.commit()
        return len(items)
