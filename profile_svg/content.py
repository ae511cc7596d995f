from pathlib import Path

from profile_svg.api.schemas.profile import ContactEntry
from profile_svg.api.schemas.profile import ProfileContent
from profile_svg.api.schemas.profile import SkillCategory


DEFAULT_PROFILE_CONTENT = ProfileContent(
    skills=[
        SkillCategory(
            title="Programming Languages & Markup",
            items=["HTML", "CSS", "JavaScript"],
        ),
        SkillCategory(
            title="Frontend Technologies & Frameworks",
            items=["React", "Next.js", "Vite", "Tailwind CSS"],
        ),
        SkillCategory(
            title="Backend, Databases & APIs",
            items=["Node.js", "Express.js", "MongoDB", "Firebase", "EmailJs"],
        ),
        SkillCategory(
            title="Tools & Version Control",
            items=["Git", "Github", "VS Code"],
        ),
        SkillCategory(
            title="Deployment & Hosting",
            items=["Render", "Vercel", "Hostinger", "Netlify"],
        ),
    ],
    contacts=[
        ContactEntry(label="Gmail", value="johndoe@gmail.com"),
        ContactEntry(label="LinkedIn", value="linkedin.com/in/johndoe"),
    ],
    about=[
        "I’m a results-driven software engineer with strong expertise in modern "
        "web technologies and a focus on developing responsive, high-performance "
        "applications.",
        "I specialize in creating clean, maintainable, and visually consistent "
        "user interfaces while ensuring optimal functionality and scalability on "
        "the backend.",
        "With hands-on experience across the MERN ecosystem and tools like "
        "React.js, Next.js, Vite, and Tailwind CSS, I approach every project with "
        "precision, problem-solving, and a commitment to best development "
        "practices.",
        "I continuously refine my skills to stay aligned with emerging "
        "technologies and industry standards, aiming to deliver solutions that "
        "balance design, performance, and reliability.",
    ],
)


def load_profile_content(path: str | None) -> ProfileContent:
    """Return static profile content, read from a JSON file when configured.

    Raises:
        OSError: If the configured file cannot be read.
        pydantic.ValidationError: If the file does not match `ProfileContent`.
    """

    if not path:
        return DEFAULT_PROFILE_CONTENT

    raw_json = Path(path).read_text(encoding="utf-8")
    return ProfileContent.model_validate_json(raw_json)
