# ABOUTME: Reporter for 2D and 3D skins
# ABOUTME: Lists the joint objects of each skin

from typing import List

from ..records import Category, SkinData
from .common import CategoryReporter, plural


class SkinReporter(CategoryReporter):
    categories = (Category.SKIN2D, Category.SKIN3D)
    referenced_by = ('object', 'objects')

    def describe(self, category, id, skin: SkinData, level=0) -> List[str]:
        text = f"  {plural(len(skin.joints), 'joint')}"
        if len(skin.joints):
            text += ': ' + ', '.join(str(int(j)) for j in skin.joints)
        return [text]
