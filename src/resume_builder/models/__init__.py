"""Data models and type definitions"""

from resume_builder.models.job_analysis import JobAnalysis
from resume_builder.models.resume_document import (
    CANONICAL_SECTION_ORDER,
    SECTION_ITEM_TYPES,
    AchievementItem,
    CertificationItem,
    EducationItem,
    ExperienceItem,
    InterestItem,
    LanguageItem,
    Proficiency,
    ProjectItem,
    ResumeDocument,
    SectionId,
    SectionItem,
    SkillCategoryItem,
    TemplateId,
    add_item,
    move_item,
    new_item_id,
    remove_item,
    update_item,
    visibility_field,
)

__all__ = [
    "CANONICAL_SECTION_ORDER",
    "SECTION_ITEM_TYPES",
    "AchievementItem",
    "CertificationItem",
    "EducationItem",
    "ExperienceItem",
    "InterestItem",
    "JobAnalysis",
    "LanguageItem",
    "Proficiency",
    "ProjectItem",
    "ResumeDocument",
    "SectionId",
    "SectionItem",
    "SkillCategoryItem",
    "TemplateId",
    "add_item",
    "move_item",
    "new_item_id",
    "remove_item",
    "update_item",
    "visibility_field",
]
