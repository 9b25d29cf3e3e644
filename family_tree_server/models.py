"""Data models for family tree records."""

from dataclasses import dataclass

from .constants import ROLE_ADMIN, ROLE_MEMBER, STATUS_PENDING


@dataclass
class Person:
    id: str
    full_name: str = ""
    gender: str = "other"  # male, female, other
    birth_year: int | None = None
    birth_month: int | None = None
    birth_day: int | None = None
    death_year: int | None = None
    death_month: int | None = None
    death_day: int | None = None
    is_deceased: bool = False
    is_in_law: bool = False
    avatar_url: str | None = None
    note: str | None = None
    is_default_root_node: bool | None = None
    # Private fields, only shown to active members
    phone_number: str | None = None
    occupation: str | None = None
    current_residence: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "gender": self.gender,
            "birth_year": self.birth_year,
            "birth_month": self.birth_month,
            "birth_day": self.birth_day,
            "death_year": self.death_year,
            "death_month": self.death_month,
            "death_day": self.death_day,
            "is_deceased": self.is_deceased,
            "is_in_law": self.is_in_law,
            "avatar_url": self.avatar_url,
            "note": self.note,
            "is_default_root_node": self.is_default_root_node,
            "phone_number": self.phone_number,
            "occupation": self.occupation,
            "current_residence": self.current_residence,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_summary(self) -> dict:
        """Short summary for list views and tree nodes."""
        return {
            "id": self.id,
            "name": self.full_name,
            "gender": self.gender,
            "birth_year": self.birth_year,
            "death_year": self.death_year,
            "is_deceased": self.is_deceased,
            "is_in_law": self.is_in_law,
        }


@dataclass
class Relationship:
    id: str
    type: str  # marriage, biological_child, adopted_child
    person_a: str  # parent for child types
    person_b: str  # child for child types
    note: str | None = None
    sort_order: int | None = None
    created_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "person_a": self.person_a,
            "person_b": self.person_b,
            "note": self.note,
            "sort_order": self.sort_order,
            "created_at": self.created_at,
        }


@dataclass
class Profile:
    id: str  # same as the auth user id
    role: str = ROLE_MEMBER
    is_active: bool = False
    full_name: str | None = None
    avatar_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "is_active": self.is_active,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class UserRootNode:
    user_id: str
    root_node_id: str
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "root_node_id": self.root_node_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class UserComment:
    id: str
    member_id: str  # the person being commented on
    user_id: str  # author
    content: str
    parent_id: str | None = None
    reply_to_user_id: str | None = None  # addressee when replying to a reply
    created_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id": self.member_id,
            "user_id": self.user_id,
            "content": self.content,
            "parent_id": self.parent_id,
            "reply_to_user_id": self.reply_to_user_id,
            "created_at": self.created_at,
        }


@dataclass
class EditRequest:
    id: str
    person_id: str
    user_id: str
    content: str
    status: str = STATUS_PENDING  # pending, approved, rejected
    admin_note: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "person_id": self.person_id,
            "user_id": self.user_id,
            "content": self.content,
            "status": self.status,
            "admin_note": self.admin_note,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
