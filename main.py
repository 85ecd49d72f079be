"""
Clean main entry point for SEO Workspace
"""
import asyncio

from app import SEOWorkspaceApp

SAMPLE_CONTENT = """KEYWORD RESEARCH BASICS
Keyword research is the starting point of every search strategy.
# Finding seed topics
Start from the questions your customers already ask and expand each one into variants.
"""


async def main():
    """Walk through each workspace feature once"""
    print("SEO Workspace - Starting...")

    workspace = SEOWorkspaceApp()

    try:
        print("\n1. Researching keywords...")
        ideas = await workspace.research_keywords("seo tools")
        for idea in ideas[:5]:
            print(f"  {idea.keyword}: volume {idea.volume}, difficulty {idea.difficulty}, {idea.intent.value}")

        print("\n2. Auditing content...")
        audit = workspace.audit_content(SAMPLE_CONTENT)
        print(f"  Score: {audit.score} - {audit.title}")
        for recommendation in audit.recommendations:
            print(f"  - {recommendation}")

        print("\n3. Tracking a ranking...")
        record = workspace.track_ranking("example.com", "seo tools")
        print(f"  #{record.position} ({record.change:+d}) for '{record.keyword}' on {record.url}")

        print("\n4. Analytics:")
        snapshot = workspace.get_analytics(refresh=True)
        print(f"  Traffic {snapshot.organic_traffic:,}, impressions {snapshot.impressions:,}, "
              f"CTR {snapshot.ctr}%, domain score {snapshot.domain_score}")

        status = workspace.get_system_status()
        print(f"\nHealth: {status['health']['overall_status']}")

    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        print("\nShutting down...")
        workspace.shutdown()
        print("Goodbye!")


if __name__ == "__main__":
    asyncio.run(main())
