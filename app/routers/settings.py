from fastapi import APIRouter, Body, HTTPException

from pantry_insights.config import load_analytics_config, save_analytics_config, config_as_dict

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
def settings_page():
    return config_as_dict(load_analytics_config())


@router.post("")
def settings_save(values: dict = Body(...)):
    try:
        config = save_analytics_config(**values)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return config_as_dict(config)
