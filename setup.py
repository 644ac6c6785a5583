# setup.py
from setuptools import setup, find_packages

setup(
    name="llms-txt",
    version="0.1.0",
    description="Генератор llms.txt и llms-full.txt: ручной список, Markdown-файлы и обход sitemap",
    packages=find_packages(exclude=["tests", "tests.*"]),  # автоматически найдёт папку llms_txt
    package_data={"llms_txt": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "lxml>=4.9",
        "beautifulsoup4>=4.12",
        "markdownify>=0.11",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "llms-txt=llms_txt.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
