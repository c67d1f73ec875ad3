from typing import Dict, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_dashboard.core.database import Base
from finance_dashboard.logger_config import logger
from finance_dashboard.models.portfolio import PPF, BondDetail, FixedDeposit, Gold, RealEstate

# URL segment -> model for the non-market portfolio assets
ASSET_MODELS: Dict[str, Type[Base]] = {
    "fds": FixedDeposit,
    "ppfs": PPF,
    "bonds": BondDetail,
    "real-estates": RealEstate,
    "golds": Gold,
}


def get_model(kind: str) -> Type[Base]:
    model = ASSET_MODELS.get(kind)
    if model is None:
        raise KeyError(kind)
    return model


def get_portfolio_assets(db: Session, user_id: str) -> dict:
    return {
        "fds": db.query(FixedDeposit).filter(FixedDeposit.user_id == user_id).all(),
        "ppfs": db.query(PPF).filter(PPF.user_id == user_id).order_by(PPF.as_of.asc()).all(),
        "bonds": db.query(BondDetail).filter(BondDetail.user_id == user_id).all(),
        "real_estates": db.query(RealEstate).filter(RealEstate.user_id == user_id).all(),
        "golds": db.query(Gold).filter(Gold.user_id == user_id).all(),
    }


def create_asset(db: Session, user_id: str, kind: str, data: dict):
    model = get_model(kind)
    asset = model(user_id=user_id, **data)
    db.add(asset)
    try:
        db.commit()
        db.refresh(asset)
        return asset
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error creating {kind} asset")
        raise ValueError(f"Failed to create {kind} asset.") from e


def delete_asset(db: Session, user_id: str, kind: str, asset_id: str) -> bool:
    model = get_model(kind)
    asset: Optional[Base] = (
        db.query(model).filter(model.id == asset_id, model.user_id == user_id).first()
    )
    if not asset:
        return False

    db.delete(asset)
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error deleting {kind} asset {asset_id}")
        raise ValueError(f"Failed to delete {kind} asset.") from e
