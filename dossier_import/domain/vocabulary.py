"""Canonical vocabulary of the territory dossier.

Holds the fixed tables the normalizer and validator share: the eight
canonical domains, the legacy dimension-name table, per-domain templates,
qualitative reliability words, source kinds and legacy field aliases.
"""

import copy
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

CANONICAL_DOMAINS: Tuple[str, ...] = (
    "contexte_hydrologique",
    "especes_caracteristiques",
    "vocabulaire_local",
    "empreintes_humaines",
    "projection_2035_2045",
    "leviers_agroecologiques",
    "nouvelles_activites",
    "technodiversite",
)

DIMENSION_CONTAINER = "dimensions"
LEGACY_DIMENSION_CONTAINER = "donnees"


@dataclass(frozen=True)
class CanonicalTarget:
    """Legacy name that maps onto a single canonical domain."""

    key: str


@dataclass(frozen=True)
class SplitTarget:
    """Legacy combined domain whose data is partitioned into two domains.

    Data keys listed in ``secondary_keys`` go to ``secondary``; every other
    key goes to ``primary``.
    """

    primary: str
    secondary: str
    secondary_keys: FrozenSet[str] = field(default_factory=frozenset)


DimensionTarget = Union[CanonicalTarget, SplitTarget]

_TECHNODIVERSITY = CanonicalTarget("technodiversite")

DIMENSION_ALIASES: Mapping[str, DimensionTarget] = {
    "infrastructures_techniques": CanonicalTarget("empreintes_humaines"),
    "infrastructures": CanonicalTarget("empreintes_humaines"),
    "contexte": CanonicalTarget("contexte_hydrologique"),
    "especes": CanonicalTarget("especes_caracteristiques"),
    "vocabulaire": CanonicalTarget("vocabulaire_local"),
    "projection": CanonicalTarget("projection_2035_2045"),
    "leviers": CanonicalTarget("leviers_agroecologiques"),
    "activites": CanonicalTarget("nouvelles_activites"),
    "techno": _TECHNODIVERSITY,
    "technodiversité": _TECHNODIVERSITY,
    "technologies": _TECHNODIVERSITY,
    "technologie": _TECHNODIVERSITY,
    "innovations": _TECHNODIVERSITY,
    "innovation": _TECHNODIVERSITY,
    "techno_diversite": _TECHNODIVERSITY,
    "techno-diversite": _TECHNODIVERSITY,
    "innovations_locales": _TECHNODIVERSITY,
    "technologies_vertes": _TECHNODIVERSITY,
    "numerique": _TECHNODIVERSITY,
    "agroecologie": SplitTarget(
        primary="leviers_agroecologiques",
        secondary="nouvelles_activites",
        secondary_keys=frozenset({
            "activites_a_developper",
            "partenariats_possibles",
            "financement_potentiel",
        }),
    ),
}


@dataclass(frozen=True)
class DimensionTemplate:
    description: str
    data: Mapping[str, Any]


DIMENSION_TEMPLATES: Mapping[str, DimensionTemplate] = {
    "contexte_hydrologique": DimensionTemplate(
        "Contexte hydrologique et caractéristiques du site d'étude",
        {"bassin_versant": "", "debit_moyen": "", "regime_hydrologique": "", "qualite_eau": "", "sources": []},
    ),
    "especes_caracteristiques": DimensionTemplate(
        "Espèces indicatrices de la biodiversité et qualité écologique",
        {"poissons": [], "invertebres": [], "vegetation_aquatique": [], "oiseaux_aquatiques": [], "sources": []},
    ),
    "vocabulaire_local": DimensionTemplate(
        "Terminologie locale, dialectes et savoirs traditionnels",
        {"termes_locaux": {}, "phenomenes": [], "pratiques": [], "sources": []},
    ),
    "empreintes_humaines": DimensionTemplate(
        "Infrastructures humaines et aménagements techniques",
        {"ouvrages_hydrauliques": [], "reseaux": [], "equipements": [], "sources": []},
    ),
    "projection_2035_2045": DimensionTemplate(
        "Projections et prospective territoriale 2035-2045",
        {"drivers_climatiques": [], "impacts_anticipes": [], "scenarios": [], "sources": []},
    ),
    "leviers_agroecologiques": DimensionTemplate(
        "Leviers agroécologiques disponibles",
        {"pratiques_agricoles": [], "cultures": [], "elevage": [], "biodiversite_cultivee": [], "sources": []},
    ),
    "nouvelles_activites": DimensionTemplate(
        "Activités à développer identifiées",
        {"activites_a_developper": [], "partenariats_possibles": [], "financement_potentiel": [], "sources": []},
    ),
    "technodiversite": DimensionTemplate(
        "Technologies émergentes et innovations territoriales",
        {"technologies_vertes": [], "innovations_locales": [], "numerique": [], "recherche_developpement": [], "sources": []},
    ),
}


def dimension_template(key: str) -> Tuple[str, Dict[str, Any]]:
    """Return a fresh (description, data defaults) pair for a domain key.

    Unknown keys get a generic description and an empty source list.
    """
    template = DIMENSION_TEMPLATES.get(key)
    if template is None:
        return f"Données pour la dimension {key}", {"sources": []}
    return template.description, copy.deepcopy(dict(template.data))


# Five-point qualitative scale, keyed by accent-free lowercase spelling
RELIABILITY_WORDS: Mapping[str, int] = {
    "tres haute": 95,
    "very high": 95,
    "haute": 85,
    "high": 85,
    "moyenne": 70,
    "medium": 70,
    "faible": 50,
    "low": 50,
    "tres faible": 30,
    "very low": 30,
}

DEFAULT_RELIABILITY = 70
LOW_RELIABILITY_THRESHOLD = 50


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def reliability_from_word(word: str) -> Optional[int]:
    """Map a qualitative reliability word to its numeric midpoint, if known."""
    normalized = " ".join(strip_accents(word).lower().replace("_", " ").replace("-", " ").split())
    return RELIABILITY_WORDS.get(normalized)


SOURCE_KINDS: FrozenSet[str] = frozenset({
    "web",
    "database",
    "documentation",
    "scientific",
    "institutional",
    "local",
    "media",
})

LEGACY_SOURCE_KINDS: Mapping[str, str] = {
    "base_donnees": "database",
    "scientifique": "scientific",
    "institutionnel": "institutional",
}

# Legacy field name -> canonical wire name, per record type
SOURCE_FIELD_ALIASES: Mapping[str, str] = {
    "titre": "title",
    "fiabilite": "reliability",
    "type": "kind",
    "date_acces": "accessedDate",
    "date_publication": "publishedDate",
    "auteur": "author",
}

FABLE_FIELD_ALIASES: Mapping[str, str] = {
    "titre": "title",
    "contenu_principal": "mainContent",
    "ordre": "order",
    "dimension": "dimensionRef",
    "inspiration_sources": "inspirationSources",
}

DIMENSION_FIELD_ALIASES: Mapping[str, str] = {
    "donnees": "data",
}

METADATA_FIELD_ALIASES: Mapping[str, str] = {
    "sourcing_date": "sourcingDate",
    "import_date": "importDate",
    "ai_model": "aiModel",
    "validation_level": "validationLevel",
}
