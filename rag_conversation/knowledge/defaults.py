"""Built-in corpus about generative AI and retrieval-augmented generation."""

from __future__ import annotations

from rag_conversation.models import KnowledgeItem

DEFAULT_ITEMS: tuple[KnowledgeItem, ...] = (
    KnowledgeItem(
        topic="Generative AI",
        keywords=("generative ai", "genai", "ai generation", "new content"),
        content=(
            "Generative AI refers to artificial intelligence systems capable of generating new content, "
            "such as text, images, audio, or video. Large Language Models (LLMs) are a prime example of "
            "generative AI, trained on vast datasets to understand and produce human-like language."
        ),
    ),
    KnowledgeItem(
        topic="RAG (Retrieval-Augmented Generation)",
        keywords=("rag", "retrieval augmented generation", "retrieval", "augmentation"),
        content=(
            "RAG combines the strengths of retrieval-based and generative AI models. It works by first "
            "retrieving relevant information from a knowledge base based on a user query, and then using "
            "that retrieved context to augment the prompt given to a generative model (like an LLM). This "
            "helps reduce hallucinations and grounds responses in factual data."
        ),
    ),
    KnowledgeItem(
        topic="Prompt Engineering",
        keywords=("prompt engineering", "prompts", "crafting prompts", "guide llms"),
        content=(
            "Prompt engineering is the art and science of crafting effective inputs (prompts) for AI "
            "models, especially LLMs, to guide them towards generating desired outputs. It involves "
            "techniques like defining roles, setting constraints, providing examples (few-shot learning), "
            "and specifying output formats."
        ),
    ),
    KnowledgeItem(
        topic="Vector Databases",
        keywords=("vector databases", "vector db", "embeddings", "similarity search"),
        content=(
            "Vector databases are specialized databases designed to store, manage, and query "
            "high-dimensional vector embeddings. They enable efficient similarity searches, allowing "
            "systems like RAG to quickly find semantically similar documents or data points based on "
            "their vector representations."
        ),
    ),
    KnowledgeItem(
        topic="Chunking Strategies",
        keywords=("chunking", "text splitting", "document chunks", "segmenting"),
        content=(
            "Chunking strategies involve breaking down large documents or texts into smaller, manageable "
            "segments (chunks) before they are embedded and stored in a vector database. Effective "
            "chunking is crucial for RAG, as it ensures that relevant information can be retrieved "
            "efficiently without overwhelming the LLM with too much context."
        ),
    ),
    KnowledgeItem(
        topic="Llama 3",
        keywords=("llama 3", "meta ai", "open-source llm"),
        content=(
            "Llama 3 is a family of large language models developed by Meta AI. It is an open-source "
            "model designed for various natural language processing tasks, known for its strong "
            "performance across benchmarks. It can be used for text generation, summarization, question "
            "answering, and more."
        ),
    ),
    KnowledgeItem(
        topic="Streamlit Deployment",
        keywords=("streamlit", "deployment", "web app", "python ui"),
        content=(
            "Streamlit is an open-source Python library that simplifies the creation of custom web "
            "applications for machine learning and data science. It allows developers to quickly build "
            "interactive UIs with minimal code, making it an ideal tool for deploying AI prototypes and "
            "demos."
        ),
    ),
    KnowledgeItem(
        topic="Evaluation Metrics (General)",
        keywords=("evaluation", "metrics", "arize ai", "performance assessment"),
        content=(
            "Evaluating AI models and systems involves using various metrics to assess their "
            "performance. For RAG systems, key metrics include context relevance (how well retrieved "
            "info matches query), answer faithfulness (is answer supported by context), and answer "
            "relevance (is answer relevant to query). Tools like Arize AI help automate this process."
        ),
    ),
    KnowledgeItem(
        topic="AI Clone Purpose",
        keywords=("ai clone", "chatbot purpose", "intelligent interaction"),
        content=(
            "An 'AI Clone' in this context refers to a sophisticated GenAI chatbot capable of providing "
            "informed and contextually relevant responses by leveraging external knowledge, mimicking "
            "intelligent interaction over a specific body of information. It's built using RAG to "
            "ground responses in facts."
        ),
    ),
)
