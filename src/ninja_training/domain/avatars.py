"""Static avatar catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Avatar:
    """Avatar unlocked at a given level."""

    id: int
    name: str
    image: str
    required_level: int


AVATARS: tuple[Avatar, ...] = (
    Avatar(id=1, name="Academy Student", image="🎯", required_level=1),
    Avatar(id=2, name="Genin", image="🌀", required_level=5),
    Avatar(id=3, name="Chunin", image="⚔️", required_level=10),
    Avatar(id=4, name="Jonin", image="🔥", required_level=15),
    Avatar(id=5, name="Hokage", image="👑", required_level=20),
)


def find_avatar(
    avatar_id: int, avatars: tuple[Avatar, ...] = AVATARS
) -> Avatar | None:
    """Return the catalog entry for an avatar id."""
    for avatar in avatars:
        if avatar.id == avatar_id:
            return avatar
    return None


def unlocked_avatars(
    level: int, avatars: tuple[Avatar, ...] = AVATARS
) -> list[Avatar]:
    """Return avatars available at the given level."""
    return [avatar for avatar in avatars if avatar.required_level <= level]
