"""Configuration constants for report rendering."""

from reportlab.lib import colors

# A4 in document units (millimetres).
PAGE_WIDTH = 210
PAGE_HEIGHT = 297

# Layout
PAGE_MARGIN = 20
HEADER_HEIGHT = 60
FOOTER_Y = 290
PAGE_BREAK_Y = 270
CONTINUATION_TOP = 20

# Branding
BRAND_TITLE = "BONNATECH"
FOOTER_ATTRIBUTION = "BonnaTech • Sistema de Rastreamento de Bombonas Sustentáveis"
NO_PRODUCTS_PLACEHOLDER = "Nenhum dado"

# File output
MONTHLY_FILENAME_TEMPLATE = "relatorio_mensal_{month:02d}_{year}.pdf"
ANNUAL_FILENAME_TEMPLATE = "relatorio_anual_{year}.pdf"
ANALYTICS_FILENAME_TEMPLATE = "relatorio_analytics_completo_{date}.pdf"
ANNUAL_WORKBOOK_FILENAME_TEMPLATE = "relatorio_anual_{year}.xlsx"
ANALYTICS_JSON_FILENAME_TEMPLATE = "analytics_completo_{date}.json"

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
JSON_MEDIA_TYPE = "application/json"

MONTH_NAMES_PT = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)

MONTH_NAMES_EN_TO_PT = {
    "January": "Janeiro",
    "February": "Fevereiro",
    "March": "Março",
    "April": "Abril",
    "May": "Maio",
    "June": "Junho",
    "July": "Julho",
    "August": "Agosto",
    "September": "Setembro",
    "October": "Outubro",
    "November": "Novembro",
    "December": "Dezembro",
}

# ZapfDingbats code points used as card and section icons.
ICON_BOX = "n"
ICON_CHECK = "4"
ICON_CYCLE = "l"
ICON_USERS = "u"
ICON_CHART = "s"
ICON_TROPHY = "H"
ICON_TABLE = "o"
ICON_RECYCLE = "8"


class Theme:
    """Color and font choices for rendering."""

    PRIMARY = colors.HexColor("#4CAF50")
    PRIMARY_DARK = colors.HexColor("#388E3C")
    PRIMARY_LIGHT = colors.HexColor("#81C784")
    PRIMARY_ULTRA_LIGHT = colors.HexColor("#C8E6C9")

    ACCENT = colors.HexColor("#43A047")
    HIGHLIGHT = colors.HexColor("#FFC107")

    WHITE = colors.white
    SHADOW = colors.black
    BACKGROUND = colors.HexColor("#FAFAFA")
    BACKGROUND_CARD = colors.HexColor("#FFFFFF")

    TEXT_PRIMARY = colors.HexColor("#212121")
    TEXT_SECONDARY = colors.HexColor("#616161")
    TEXT_MUTED = colors.HexColor("#9E9E9E")
    BORDER = colors.HexColor("#E0E0E0")
    BORDER_LIGHT = colors.HexColor("#EEEEEE")

    SUCCESS = colors.HexColor("#4CAF50")
    WARNING = colors.HexColor("#FF9800")
    ERROR = colors.HexColor("#F44336")
    INFO = colors.HexColor("#2196F3")
    INACTIVE = colors.HexColor("#BDBDBD")

    FONT_REGULAR = "Helvetica"
    FONT_BOLD = "Helvetica-Bold"
    FONT_ICON = "ZapfDingbats"
