from typing import Any, Iterable
from school_portal.schemas.class_sections import DEFAULT_CAPACITY, ClassSectionCreate


def _id(item: Any) -> str:
    return item["id"] if isinstance(item, dict) else item.id


def _pair(item: Any) -> tuple[str, str]:
    if isinstance(item, dict):
        return item["classId"], item["sectionId"]
    return item.class_id, item.section_id


def missing_combinations(
    classes: Iterable[Any],
    sections: Iterable[Any],
    existing: Iterable[Any],
) -> list[tuple[str, str]]:
    """Every (class_id, section_id) of classes x sections with no class section yet.

    Order follows the classes, then the sections within each class.
    """
    taken = {_pair(cs) for cs in existing}
    section_ids = [_id(sec) for sec in sections]

    missing = []
    for cls in classes:
        class_id = _id(cls)
        for section_id in section_ids:
            if (class_id, section_id) not in taken:
                missing.append((class_id, section_id))
    return missing


def plan_class_sections(
    combinations: Iterable[tuple[str, str]],
    capacity: int = DEFAULT_CAPACITY,
) -> list[ClassSectionCreate]:
    return [
        ClassSectionCreate(class_id=class_id, section_id=section_id, capacity=capacity)
        for class_id, section_id in combinations
    ]
