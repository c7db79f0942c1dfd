"""
Enhancement Catalog

Static category -> enhancement mapping, plus the category list, advanced-mode
groups, presets and starter prompts. Data only; nothing here mutates.
"""

from typing import Dict, List, Optional

from models.enhancement import Category, CategoryGroup, Enhancement, Preset, PresetEnhancement


# Tabs shown in simple mode, in display order
CATEGORIES: List[Category] = [
    Category("camera-angles", "Camera Angles"),
    Category("camera-motion", "Camera Motion"),
    Category("lighting", "Lighting"),
    Category("style", "Style"),
    Category("depth-of-field", "Depth of Field"),
    Category("motion-timing", "Motion/Timing"),
    Category("color-palette", "Color Palette"),
]

# Additional categories only reachable in advanced mode
ADVANCED_CATEGORIES: List[Category] = [
    Category("weather", "Weather"),
    Category("time-of-day", "Time of Day"),
    Category("composition", "Composition"),
    Category("mood", "Mood"),
    Category("texture", "Texture"),
]

ALL_CATEGORIES: List[Category] = CATEGORIES + ADVANCED_CATEGORIES

_BY_ID: Dict[str, Category] = {c.id: c for c in ALL_CATEGORIES}

CATEGORY_GROUPS: List[CategoryGroup] = [
    CategoryGroup("camera", "Camera", [
        _BY_ID["camera-angles"], _BY_ID["camera-motion"],
        _BY_ID["depth-of-field"], _BY_ID["composition"],
    ]),
    CategoryGroup("light-atmosphere", "Light & Atmosphere", [
        _BY_ID["lighting"], _BY_ID["time-of-day"], _BY_ID["weather"],
    ]),
    CategoryGroup("look", "Look", [
        _BY_ID["style"], _BY_ID["color-palette"], _BY_ID["texture"],
    ]),
    CategoryGroup("story", "Story", [
        _BY_ID["mood"], _BY_ID["motion-timing"],
    ]),
]


def _items(category: str, rows: List[tuple]) -> List[Enhancement]:
    return [Enhancement(id=i, title=t, description=d, category=category) for i, t, d in rows]


ENHANCEMENTS: Dict[str, List[Enhancement]] = {
    "camera-angles": _items("camera-angles", [
        ("ca-1", "Wide Establishing Shot", "Eye-level wide angle capturing the full scene context"),
        ("ca-2", "Dutch Angle", "Tilted camera creating dynamic tension and unease"),
        ("ca-3", "Bird's Eye View", "Overhead shot looking directly down on the subject"),
        ("ca-4", "Low Angle", "Camera positioned below subject looking up, emphasizing power"),
        ("ca-5", "Over-the-Shoulder", "Framed from behind one subject viewing another"),
        ("ca-6", "Close-Up", "Tight framing on subject's face or detail, intimate and emotional"),
        ("ca-7", "Extreme Close-Up", "Very tight shot on specific detail like eyes or hands"),
        ("ca-8", "Medium Shot", "Waist-up framing balancing subject and environment"),
    ]),
    "camera-motion": _items("camera-motion", [
        ("cm-1", "Slow Dolly In", "Smooth forward camera movement creating intimacy"),
        ("cm-2", "Tracking Shot", "Camera following subject's lateral movement fluidly"),
        ("cm-3", "Handheld", "Natural camera shake for documentary realism and energy"),
        ("cm-4", "Crane Shot", "Sweeping vertical or arcing movement for grandeur"),
        ("cm-5", "Slow Pan", "Horizontal rotation revealing the environment gradually"),
        ("cm-6", "Tilt Up/Down", "Vertical rotation from ground to sky or vice versa"),
        ("cm-7", "Steadicam Glide", "Smooth floating movement through space"),
        ("cm-8", "Static/Locked", "Fixed camera position allowing action to unfold"),
    ]),
    "lighting": _items("lighting", [
        ("l-1", "Golden Hour", "Warm, soft natural light during sunrise or sunset"),
        ("l-2", "Hard Side Light", "Strong directional light creating dramatic shadows"),
        ("l-3", "Soft Diffused", "Even, wraparound lighting with minimal shadows"),
        ("l-4", "Backlighting", "Light from behind subject creating silhouette or rim light"),
        ("l-5", "Volumetric Rays", "Visible light beams cutting through atmosphere or fog"),
        ("l-6", "Neon Glow", "Colorful artificial lighting with electric atmosphere"),
        ("l-7", "Candlelit Ambience", "Warm, flickering practical light sources"),
        ("l-8", "Blue Hour", "Cool twilight tones with deep blue sky"),
    ]),
    "style": _items("style", [
        ("s-1", "Cinematic Anamorphic", "2.39:1 widescreen with characteristic lens flares"),
        ("s-2", "1970s Film Stock", "Grainy, warm tones with vintage color science"),
        ("s-3", "IMAX Documentary", "Crystal-clear, ultra-sharp large-format aesthetic"),
        ("s-4", "Black & White Film Noir", "High contrast monochrome with deep shadows"),
        ("s-5", "Wes Anderson Symmetry", "Perfectly centered, pastel-colored compositions"),
        ("s-6", "Blade Runner Cyberpunk", "Neon-soaked, rain-slicked dystopian atmosphere"),
        ("s-7", "16mm Documentary", "Raw, authentic handheld with natural grain"),
        ("s-8", "Music Video Energy", "Dynamic cuts, color grading, stylized visuals"),
    ]),
    "depth-of-field": _items("depth-of-field", [
        ("dof-1", "Shallow Focus", "Subject sharp, background beautifully blurred (bokeh)"),
        ("dof-2", "Deep Focus", "Everything from foreground to background in crisp focus"),
        ("dof-3", "Rack Focus", "Focus shifts from one subject to another during shot"),
        ("dof-4", "Selective Focus", "Isolating specific element while rest falls soft"),
        ("dof-5", "Tilt-Shift Miniature", "Narrow plane of focus creating toy-like effect"),
        ("dof-6", "Hyperfocal Distance", "Maximum depth with acceptable sharpness throughout"),
    ]),
    "motion-timing": _items("motion-timing", [
        ("mt-1", "Slow Motion", "Action slowed to 1/4 speed for dramatic effect"),
        ("mt-2", "Time-lapse", "Hours compressed into seconds showing passage of time"),
        ("mt-3", "Beat-Perfect Timing", "Actions synchronized to counted beats (3 steps, pause, turn)"),
        ("mt-4", "Held Moment", "Subject freezes mid-action for 2 seconds before continuing"),
        ("mt-5", "Gradual Reveal", "Subject or object slowly enters frame over 4 seconds"),
        ("mt-6", "Quick Cut Energy", "Fast-paced action completing in under 2 seconds"),
    ]),
    "color-palette": _items("color-palette", [
        ("cp-1", "Warm Earth Tones", "Amber, terracotta, burnt sienna, cream palette"),
        ("cp-2", "Cool Blue-Teal", "Icy blues, teals, silver creating cold atmosphere"),
        ("cp-3", "Complementary Orange-Teal", "Classic cinematic color scheme with high contrast"),
        ("cp-4", "Monochromatic Green", "Various shades of single color for cohesive mood"),
        ("cp-5", "Pastel Dream", "Soft pinks, lavenders, mint greens, peachy tones"),
        ("cp-6", "Neon Synthwave", "Electric purples, hot pinks, cyan creating retro-future vibe"),
        ("cp-7", "Desaturated Bleach", "Washed-out colors with blown highlights"),
        ("cp-8", "Rich Jewel Tones", "Deep emerald, sapphire, ruby, gold for opulence"),
    ]),
    "weather": _items("weather", [
        ("w-1", "Morning Mist", "Soft fog rolling through scene adding mystery"),
        ("w-2", "Gentle Rain", "Light rainfall creating texture and reflections"),
        ("w-3", "Falling Snow", "Snowflakes drifting creating serene atmosphere"),
        ("w-4", "Dust Particles", "Floating particles caught in light beams"),
        ("w-5", "Heavy Storm", "Dramatic clouds and turbulent atmosphere"),
        ("w-6", "Clear Crisp Air", "High visibility with sharp atmospheric clarity"),
    ]),
    "time-of-day": _items("time-of-day", [
        ("tod-1", "Golden Hour", "Warm sunset/sunrise light with long shadows"),
        ("tod-2", "Blue Hour", "Deep twilight blues before sunrise or after sunset"),
        ("tod-3", "Harsh Midday", "Direct overhead sun with strong contrast"),
        ("tod-4", "Twilight Dusk", "Fading light with rich gradient skies"),
        ("tod-5", "Deep Night", "Dark atmosphere lit by moon or artificial sources"),
        ("tod-6", "Early Dawn", "First light breaking with cool morning tones"),
    ]),
    "composition": _items("composition", [
        ("comp-1", "Rule of Thirds", "Subject positioned on intersecting grid lines"),
        ("comp-2", "Symmetrical Balance", "Perfect mirror balance creating harmony"),
        ("comp-3", "Leading Lines", "Natural lines guiding eye to subject"),
        ("comp-4", "Negative Space", "Empty areas emphasizing subject isolation"),
        ("comp-5", "Framing Device", "Natural frame within frame (doorway, window)"),
        ("comp-6", "Diagonal Dynamics", "Angled elements creating visual energy"),
    ]),
    "mood": _items("mood", [
        ("mood-1", "Serene & Peaceful", "Calm, tranquil emotional atmosphere"),
        ("mood-2", "Tense & Suspenseful", "Anxious anticipation and unease"),
        ("mood-3", "Mysterious & Enigmatic", "Unknown elements creating curiosity"),
        ("mood-4", "Nostalgic & Wistful", "Bittersweet remembrance and longing"),
        ("mood-5", "Uplifting & Joyful", "Optimistic and energizing emotion"),
        ("mood-6", "Melancholic & Somber", "Reflective sadness and contemplation"),
    ]),
    "texture": _items("texture", [
        ("tex-1", "Film Grain", "35mm organic grain texture throughout"),
        ("tex-2", "Smooth Surfaces", "Polished, clean textures with minimal detail"),
        ("tex-3", "Rough Weathered", "Aged, worn surfaces with character"),
        ("tex-4", "Glossy Reflective", "Shiny surfaces with mirror-like quality"),
        ("tex-5", "Matte Finish", "Non-reflective surfaces absorbing light"),
        ("tex-6", "Organic Natural", "Tactile natural materials like wood, stone"),
    ]),
}


PRESETS: List[Preset] = [
    Preset(
        id="cinematic-drama",
        name="Cinematic Drama",
        description="Professional dramatic look with depth and atmosphere",
        enhancements=[
            PresetEnhancement("Low Angle Shot", "Camera below subject emphasizing power and drama", "camera-angles"),
            PresetEnhancement("Hard Side Light", "Strong directional lighting with dramatic shadows", "lighting"),
            PresetEnhancement("Cinematic Anamorphic", "Widescreen with characteristic lens flares", "style"),
            PresetEnhancement("Shallow Focus", "Subject sharp, background beautifully blurred", "depth-of-field"),
        ],
    ),
    Preset(
        id="dreamy-atmosphere",
        name="Dreamy Atmosphere",
        description="Soft, ethereal mood with gentle motion",
        enhancements=[
            PresetEnhancement("Soft Diffused Light", "Even, wraparound lighting with minimal shadows", "lighting"),
            PresetEnhancement("Golden Hour Glow", "Warm sunrise or sunset natural light", "time-of-day"),
            PresetEnhancement("Slow Dolly Movement", "Gentle forward camera motion", "camera-motion"),
            PresetEnhancement("Pastel Color Palette", "Soft pinks, lavenders, mint greens", "color-palette"),
        ],
    ),
    Preset(
        id="action-energy",
        name="Action & Energy",
        description="Dynamic movement with bold visual impact",
        enhancements=[
            PresetEnhancement("Handheld Camera", "Natural shake for documentary energy", "camera-motion"),
            PresetEnhancement("High Contrast", "Bold shadows and highlights", "lighting"),
            PresetEnhancement("Quick Timing", "Fast-paced action under 2 seconds", "motion-timing"),
            PresetEnhancement("Wide Establishing Shot", "Full scene context with action", "camera-angles"),
        ],
    ),
    Preset(
        id="documentary-realism",
        name="Documentary Realism",
        description="Authentic, natural look with minimal stylization",
        enhancements=[
            PresetEnhancement("Natural Lighting", "Soft ambient light without artificial sources", "lighting"),
            PresetEnhancement("Medium Shot Framing", "Balanced subject and environment", "camera-angles"),
            PresetEnhancement("16mm Documentary Style", "Raw, authentic with natural grain", "style"),
            PresetEnhancement("Deep Focus", "Everything sharp from foreground to background", "depth-of-field"),
        ],
    ),
]

STARTER_PROMPTS: List[str] = [
    "A serene beach at sunset with gentle waves",
    "Bustling city street in the rain at night",
    "Mountain landscape with morning fog rolling through valleys",
    "Cozy coffee shop interior with warm lighting",
    "Forest path with dappled sunlight filtering through trees",
    "Modern kitchen with chef preparing a meal",
]


def get_category(category_id: str) -> Optional[Category]:
    return _BY_ID.get(category_id)


def get_category_label(category_id: str) -> str:
    """Display label, falling back to the raw id for unknown categories"""
    category = _BY_ID.get(category_id)
    return category.label if category else category_id


def is_known_category(category_id: str) -> bool:
    return category_id in _BY_ID


def get_enhancements(category_id: str) -> List[Enhancement]:
    return list(ENHANCEMENTS.get(category_id, []))


def find_enhancement(enhancement_id: str) -> Optional[Enhancement]:
    for items in ENHANCEMENTS.values():
        for enhancement in items:
            if enhancement.id == enhancement_id:
                return enhancement
    return None


def get_preset(preset_id: str) -> Optional[Preset]:
    for preset in PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def catalog_snapshot() -> dict:
    """Serializable view of the whole catalog (served by GET /api/catalog)"""
    return {
        "categories": [{"id": c.id, "label": c.label} for c in CATEGORIES],
        "allCategories": [{"id": c.id, "label": c.label} for c in ALL_CATEGORIES],
        "groups": [
            {
                "id": group.id,
                "label": group.label,
                "categories": [c.id for c in group.categories],
            }
            for group in CATEGORY_GROUPS
        ],
        "enhancements": {
            category_id: [e.to_dict() for e in items]
            for category_id, items in ENHANCEMENTS.items()
        },
        "presets": [
            {
                "id": preset.id,
                "name": preset.name,
                "description": preset.description,
                "enhancements": [
                    {"title": e.title, "description": e.description, "category": e.category}
                    for e in preset.enhancements
                ],
            }
            for preset in PRESETS
        ],
        "starterPrompts": list(STARTER_PROMPTS),
    }
