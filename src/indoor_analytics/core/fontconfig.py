"""
fontconfig.py
日本語ラベル（エリア名・エイリアス）を表示するための共通フォント設定。
"""
import matplotlib.pyplot as plt

# 先頭から順に利用可能なものが使われる
CJK_FONT_FAMILIES = ["Noto Sans CJK JP", "IPAGothic", "IPAexGothic", "Meiryo", "DejaVu Sans"]


def setup_fonts() -> None:
    """環境依存フォント設定を適用"""
    plt.rcParams["font.family"] = "sans-serif"
    plt.rcParams["font.sans-serif"] = CJK_FONT_FAMILIES + [
        f for f in plt.rcParams["font.sans-serif"] if f not in CJK_FONT_FAMILIES
    ]
    plt.rcParams["axes.unicode_minus"] = False
