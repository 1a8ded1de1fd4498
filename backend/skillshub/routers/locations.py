from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from skillshub.database import get_db
from skillshub.models import Region

router = APIRouter()


@router.get("/regions")
def list_regions(db: Session = Depends(get_db)):
    """Regions of Sierra Leone with their districts, alphabetical."""
    regions = (
        db.query(Region)
        .options(selectinload(Region.districts))
        .order_by(Region.name)
        .all()
    )
    return {
        "regions": [
            {
                "id": region.id,
                "name": region.name,
                "districts": [{"id": d.id, "name": d.name} for d in region.districts],
            }
            for region in regions
        ]
    }
