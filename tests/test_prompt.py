from models import DocumentDescriptor
from prompt import LOADING_NOTE, build_system_prompt, format_document_list


def test_document_lines():
    documents = [
        DocumentDescriptor(
            name="RPT_SafetyMeasures_S12_v1.2.pdf",
            path="documents/RPT_SafetyMeasures_S12_v1.2.pdf",
            size=2048,
        ),
        DocumentDescriptor(
            name="RPT_SafetyMeasures_S3-Grika_v1.2.pdf",
            path="documents/RPT_SafetyMeasures_S3-Grika_v1.2.pdf",
        ),
    ]

    section = format_document_list(documents)

    assert "DOCUMENTS DISPONIBLES DANS LE RÉFÉRENTIEL :" in section
    assert "1. RPT_SafetyMeasures_S12_v1.2.pdf (S12) - 2.0 KB" in section
    assert "2. RPT_SafetyMeasures_S3-Grika_v1.2.pdf (S3 Grika) - Inconnu KB" in section
    assert section.endswith("Total : 2 rapports d'innovation disponibles pour l'analyse.")


def test_no_documents_gives_loading_note():
    assert format_document_list([]) == LOADING_NOTE


def test_prompt_embeds_document_section():
    doc = DocumentDescriptor(name="RPT_SafetyMeasures_S12_v1.2.pdf", path="documents/x.pdf")
    prompt = build_system_prompt([doc])

    assert prompt.startswith("Vous êtes un agent IA")
    assert "(S12)" in prompt
    assert 'utilisez des puces commençant par "-"' in prompt
    assert LOADING_NOTE not in prompt
