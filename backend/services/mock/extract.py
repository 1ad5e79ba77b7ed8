# Returned for scanned documents while no OCR service is wired in
SAMPLE_CONTRACT_TEXT = """CONTRAT D'ASSURANCE AUTOMOBILE

Assuré : Jean Dupont
Véhicule : Renault Clio 2020
Immatriculation : AB-123-CD

GARANTIES INCLUSES :
- Responsabilité civile
- Dommages tous accidents
- Vol et incendie
- Protection juridique

MONTANTS :
Prime mensuelle : 45€
Franchise : 350€
Plafond de garantie : 50 000€

EXCLUSIONS :
- Conduite en état d'ivresse
- Catastrophes naturelles
- Usage professionnel du véhicule

Date de souscription : 01/01/2024
Échéance annuelle : 31/12/2024"""


def mock_extract(file_name: str, data: bytes) -> str:
    """Stand-in OCR: every scanned document reads as the sample contract"""
    return SAMPLE_CONTRACT_TEXT
