# backend/schemas/settings.py
from typing import Dict, Union

from pydantic import RootModel


# Settings travel as a flat {key: value} map; keys are already camelCase
class SettingsMap(RootModel[Dict[str, str]]):
    pass


# Incoming values may be numbers or booleans; they are stored as strings
class SettingsPatch(RootModel[Dict[str, Union[str, int, float, bool, None]]]):
    pass
